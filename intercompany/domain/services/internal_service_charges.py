"""
Internal Service Charges - What one company owes another for shared costs.

Only accounts owned by the sender that are shared or salary are considered.
Each such account is split with the regular share step (the sender's salary
cap is consumed in account order) and the payer's part is
round2(ratio(payer) * base_to_share).
"""
import logging
from decimal import Decimal
from typing import Dict, Mapping, Optional

from intercompany.domain.entities import MonthContext
from intercompany.domain.money import ZERO, multiply, round_money
from .allocation_engine import AllocationEngine, StaffRemaining

logger = logging.getLogger(__name__)


class InternalServiceCharges:
    """Category totals a payer owes a sender for one month."""

    def __init__(self, engine: Optional[AllocationEngine] = None):
        self.engine = engine or AllocationEngine()

    def owed_by_category(
        self,
        context: MonthContext,
        lumps_by_account: Mapping[str, Decimal],
        sender_uuid: str,
        payer_uuid: str,
    ) -> Dict[str, Decimal]:
        """
        Amount `payer_uuid` owes `sender_uuid`, per category.

        Args:
            context: Month context (INVOICE_V1 for invoice drafts)
            lumps_by_account: Account uuid -> lump amount for the context's mode
            sender_uuid: Company issuing the internal invoice
            payer_uuid: Company being invoiced

        Returns:
            Category code -> amount (only categories with a positive amount)

        Raises:
            CompanyNotFoundError: If sender or payer is not part of the group
        """
        context.company(sender_uuid)
        context.company(payer_uuid)
        ratio = context.ratio(payer_uuid)

        owed: Dict[str, Decimal] = {}
        remaining: StaffRemaining = dict(context.staff_baseline)
        for category, account in context.accounts():
            if account.company_uuid != sender_uuid or not account.distributable:
                continue

            gl = context.gl_amount(sender_uuid, account.account_code)
            lump = lumps_by_account.get(account.uuid, ZERO)
            share, remaining = self.engine.share_for_account(
                context, account, sender_uuid, gl, lump, remaining
            )

            part = round_money(multiply(share.base_to_share, ratio))
            if part > 0:
                owed[category.account_code] = owed.get(category.account_code, ZERO) + part

        logger.debug(
            f"{payer_uuid} owes {sender_uuid} in {len(owed)} categories "
            f"for {context.year}-{context.month:02d}"
        )
        return owed
