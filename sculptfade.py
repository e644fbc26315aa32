#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#

from __future__ import annotations

import sys

from sculptfade.cli import main


if __name__ == "__main__":
    sys.exit(main())
