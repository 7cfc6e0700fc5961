"""
CSV renderer for the export endpoint.

Selected by DRF content negotiation (``?format=csv`` or
``Accept: text/csv``).  Export payloads (``columns`` + ``rows``) become a
header line plus one line per complaint; any other dict (error bodies)
is written as a single header/value pair of lines.
"""

from __future__ import annotations

import csv
import io

from rest_framework import renderers


class ComplaintCSVRenderer(renderers.BaseRenderer):
    media_type = "text/csv"
    format = "csv"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        if isinstance(data, dict) and "columns" in data and "rows" in data:
            writer.writerow(data["columns"])
            writer.writerows(data["rows"])
        elif isinstance(data, dict):
            writer.writerow(list(data.keys()))
            writer.writerow([str(value) for value in data.values()])
        else:
            writer.writerow([str(data)])
        return buffer.getvalue().encode(self.charset)
