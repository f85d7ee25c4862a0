from rpm_builder.cli import main

raise SystemExit(main())
