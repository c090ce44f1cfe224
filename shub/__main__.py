from shub.cli import main

raise SystemExit(main())
