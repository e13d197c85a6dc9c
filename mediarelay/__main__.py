from mediarelay.app.cli import main

raise SystemExit(main())
