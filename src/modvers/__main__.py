from modvers.cli import main

raise SystemExit(main())
