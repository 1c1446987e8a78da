"""Module executed when running ``python -m webradio_exporter``."""

from __future__ import annotations

import sys

from .cli import main

sys.exit(main())
