"""Allow ``python -m tara_tracking``."""

from .cli import main

raise SystemExit(main())
