from ringlog.cli.main import main

raise SystemExit(main())
