from teamfights.cli import main

raise SystemExit(main())
