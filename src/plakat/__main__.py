from plakat.cli import main

raise SystemExit(main())
