from envpull.cli import main

raise SystemExit(main())
