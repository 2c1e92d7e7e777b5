"""
Intercompany Allocation Engine.

Distributes shared general-ledger costs between the companies of a group in
proportion to their consultant headcount.
"""

__version__ = "1.0.0"
