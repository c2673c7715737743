from yeth.cli import main

raise SystemExit(main())
