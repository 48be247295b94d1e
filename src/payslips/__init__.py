"""Convert batch-printed PCL payslip exports into paginated PDF documents.

The package is organised as a small pipeline: :mod:`payslips.preprocess`
cleans and splits the raw printer stream, :mod:`payslips.io` reads input files
and writes the PDF, and :mod:`payslips.pipeline` runs a batch of files through
both.  The command line interface lives in :mod:`payslips.cli`.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
