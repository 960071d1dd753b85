from ratcalc.cli import main

raise SystemExit(main())
