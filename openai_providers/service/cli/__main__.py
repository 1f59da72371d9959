"""``python -m openai_providers.service.cli``"""

from __future__ import annotations

from . import main

raise SystemExit(main())
