"""
Allocation Engine - Splits GL amounts between origin and payer companies.

Per account:
    gl              = round2(max(gl, 0))
    share_candidate = max(gl - lump, 0)              lumps are never shared
    base_to_share   = share_candidate                shared, non-salary
                    = min(share_candidate, cap)      salary, cap = origin's remaining staff baseline
                    = 0                              otherwise, or no consultants in the group
    origin_remainder = round2(gl - round2(base_to_share))

Per payer:
    allocation = round2(ratio(payer) * base_to_share)
               + origin_remainder                    only when payer is the origin

The salary cap is consumed in category-then-account order. That order is
part of the result and must not change.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

from intercompany.domain.entities import (
    AccountingAccount,
    AccountShare,
    MonthContext,
    ShareAmounts,
)
from intercompany.domain.money import ZERO, clamp_non_negative, multiply, round_money

logger = logging.getLogger(__name__)

StaffRemaining = Mapping[str, Decimal]


class AllocationEngine:
    """
    Stateless allocation functions over a MonthContext.

    The remaining salary cap is threaded through the account iteration as an
    explicit accumulator: every share step returns the split together with
    the cap state for the next account.
    """

    def share_for_account(
        self,
        context: MonthContext,
        account: AccountingAccount,
        origin_uuid: str,
        gl_amount: Decimal,
        lump_amount: Decimal,
        staff_remaining: StaffRemaining,
    ) -> Tuple[ShareAmounts, StaffRemaining]:
        """
        Decide how much of one account's GL amount is shared.

        Args:
            context: Month context (consultant gating)
            account: Account being split
            origin_uuid: Company whose ledger holds the amount
            gl_amount: GL amount for the account
            lump_amount: Lump-sum amount for the account
            staff_remaining: Remaining salary cap per company

        Returns:
            Tuple of (ShareAmounts, remaining cap after this account).
            The input mapping is never modified.
        """
        gl = round_money(clamp_non_negative(gl_amount))
        share_candidate = clamp_non_negative(gl - lump_amount)

        base_to_share = ZERO
        remaining = staff_remaining
        if context.has_consultants:
            if account.salary:
                cap = staff_remaining.get(origin_uuid, ZERO)
                if cap > 0:
                    base_to_share = min(share_candidate, cap)
                    remaining = dict(staff_remaining)
                    remaining[origin_uuid] = cap - base_to_share
            elif account.shared:
                base_to_share = share_candidate

        base_to_share = round_money(base_to_share)
        share = ShareAmounts(
            base_to_share=base_to_share,
            origin_remainder=round_money(gl - base_to_share),
        )
        return share, remaining

    def account_shares(
        self,
        context: MonthContext,
        lumps_by_account: Mapping[str, Decimal],
    ) -> List[AccountShare]:
        """
        Run the share step over every account of the context, in order.

        The cap starts from a fresh copy of the context's staff baseline, so
        repeated calls with the same inputs return the same shares.

        Raises:
            CompanyNotFoundError: If an account's origin is not in the group
        """
        remaining: StaffRemaining = dict(context.staff_baseline)
        shares = []
        for category, account in context.accounts():
            origin_uuid = account.company_uuid
            context.company(origin_uuid)

            gl = context.gl_amount(origin_uuid, account.account_code)
            lump = lumps_by_account.get(account.uuid, ZERO)
            share, remaining = self.share_for_account(
                context, account, origin_uuid, gl, lump, remaining
            )
            shares.append(AccountShare(
                category=category,
                account=account,
                gl_amount=gl,
                lump_amount=lump,
                share=share,
            ))
        return shares

    @staticmethod
    def ratio_part(context: MonthContext, account_share: AccountShare, payer_uuid: str) -> Decimal:
        """Payer's ratio share of the base, rounded to 2 decimals (zero when nothing is shared)."""
        base = account_share.share.base_to_share
        if base <= 0:
            return ZERO
        return round_money(multiply(base, context.ratio(payer_uuid)))

    def payer_allocation(
        self,
        context: MonthContext,
        account_share: AccountShare,
        payer_uuid: str,
    ) -> Decimal:
        """
        Amount of one account that ends up with `payer_uuid`.

        The origin company additionally takes its signed remainder, so the
        allocations over all payers add back up to the account's GL amount.
        """
        allocation = self.ratio_part(context, account_share, payer_uuid)
        if payer_uuid == account_share.origin_uuid:
            allocation += account_share.share.origin_remainder
        return allocation

    def category_totals_for_payer(
        self,
        context: MonthContext,
        lumps_by_account: Mapping[str, Decimal],
        payer_uuid: str,
    ) -> Dict[str, Decimal]:
        """
        Final post-distribution total per category for one payer company.

        Every call recomputes the shares from the context, so calling it once
        per payer is safe and order independent.

        Args:
            context: Month context
            lumps_by_account: Account uuid -> lump amount for the context's mode
            payer_uuid: Company to compute totals for

        Returns:
            Category code -> total, rounded to 2 decimals

        Raises:
            CompanyNotFoundError: If the payer is not part of the group
        """
        context.company(payer_uuid)

        totals: Dict[str, Decimal] = {}
        for account_share in self.account_shares(context, lumps_by_account):
            allocation = self.payer_allocation(context, account_share, payer_uuid)
            if allocation != 0:
                code = account_share.category.account_code
                totals[code] = totals.get(code, ZERO) + allocation

        if not context.has_consultants:
            logger.debug(
                f"No consultants in {context.year}-{context.month:02d}; "
                f"all amounts stay with their origin"
            )
        return {code: round_money(amount) for code, amount in totals.items()}
