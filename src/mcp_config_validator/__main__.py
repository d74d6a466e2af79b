from mcp_config_validator.cli import main


raise SystemExit(main())
