"""
ElfScope Output
================

Rich console rendering and JSON report generation for image reports.
"""

from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator

__all__ = ["ElfConsoleOutput", "ElfReportGenerator"]
