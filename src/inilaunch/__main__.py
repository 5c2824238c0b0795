from inilaunch.cli import main

raise SystemExit(main())
