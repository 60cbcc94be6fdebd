from webflow_starter.cli import main

raise SystemExit(main())
