from rowtable.cli import main

raise SystemExit(main())
