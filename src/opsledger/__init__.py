"""OpsLedger: attendance, payroll and financial aggregation for a small business."""

__version__ = "0.1.0"
