from carton_snapshot.cli import main

raise SystemExit(main())
