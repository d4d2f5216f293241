from hashfield.cli import main

raise SystemExit(main())
