"""widgetkit public API.

Reusable canvas widgets. The charting engine lives in ``widgetkit.charting``;
shared infrastructure (event bus, error handling, settings) in
``widgetkit.services``.

Importing this package has no side effects: no QApplication is created and
no Qt module is imported until a widget is requested.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
