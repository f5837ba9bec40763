"""Idempotent payslip issuing."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.config import Settings, get_settings
from payroll_admin.exceptions import NotFoundError, PaySlipNumberExhaustedError
from payroll_admin.models import PaySlip
from payroll_admin.stores import PaySlipStore, PayrollStore

logger = logging.getLogger(__name__)

STATUS_GENERATED = "Generated"
MAX_NUMBER_ATTEMPTS = 5


def payslip_number(employee_id: int, period_start: date, suffix: int) -> str:
    """Format ``PS-{employee}-{YYYYMM}-{NNNN}``."""
    return f"PS-{employee_id}-{period_start.strftime('%Y%m')}-{suffix:04d}"


def mask_bank_account(employee_id: int) -> str:
    """Placeholder account reference derived from the employee id."""
    return f"XXXX-XXXX-{employee_id:04d}"


class PaySlipIssuer:
    """Issues exactly one payslip per payroll.

    The random four-digit suffix is not unique by construction. A drawn
    number that is already taken is redrawn before anything is written, so
    an ordinary collision never touches the caller's unit of work. The
    unique index on ``payslip_number`` still catches a concurrent writer;
    draws are bounded by ``MAX_NUMBER_ATTEMPTS``.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
        rng: random.Random | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.today = today
        self.rng = rng or random.Random()
        self.payrolls = PayrollStore(session)
        self.pay_slips = PaySlipStore(session)

    async def issue(self, payroll_id: int) -> PaySlip:
        """Return the payslip for a payroll, creating it on first request.

        Raises:
            NotFoundError: If the payroll does not exist, including a payroll
                discarded by the rollback after a lost race
            PaySlipNumberExhaustedError: If every drawn number was taken
        """
        payroll = await self.payrolls.get_by_id(payroll_id)

        existing = await self.pay_slips.find_by_payroll_id(payroll_id)
        if existing is not None:
            return existing

        employee_id = payroll.employee_id
        period_start = payroll.pay_period_start

        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            number = payslip_number(employee_id, period_start, self.rng.randint(0, 9999))
            if await self.pay_slips.find_by_number(number) is not None:
                logger.warning(
                    "Payslip number %s already taken, drawing a new suffix for payroll %s",
                    number,
                    payroll_id,
                )
                continue

            pay_slip = self._build(payroll_id, employee_id, number)
            try:
                await self.pay_slips.save(pay_slip)
            except IntegrityError:
                await self.session.rollback()
                existing = await self.pay_slips.find_by_payroll_id(payroll_id)
                if existing is not None:
                    # Another request issued the slip first
                    return existing
                # The rollback drops a payroll flushed but not yet committed
                await self.payrolls.get_by_id(payroll_id)
                if attempt == MAX_NUMBER_ATTEMPTS:
                    raise
                logger.warning(
                    "Payslip number %s collided for payroll %s, drawing a new suffix",
                    number,
                    payroll_id,
                )
                continue

            logger.info(
                "Issued payslip %s (%s) for payroll %s",
                pay_slip.pay_slip_id,
                number,
                payroll_id,
            )
            return pay_slip

        raise PaySlipNumberExhaustedError(payroll_id, MAX_NUMBER_ATTEMPTS)

    def _build(self, payroll_id: int, employee_id: int, number: str) -> PaySlip:
        issue_date = self.today()
        return PaySlip(
            payroll_id=payroll_id,
            payslip_number=number,
            issue_date=issue_date,
            payment_date=issue_date + timedelta(days=self.settings.payslip_payment_delay_days),
            bank_account_number=mask_bank_account(employee_id),
            status=STATUS_GENERATED,
        )

    async def get_payslip(self, pay_slip_id: int) -> PaySlip:
        """Load a payslip by id."""
        return await self.pay_slips.get_by_id(pay_slip_id)

    async def list_for_employee(self, employee_id: int) -> list[PaySlip]:
        """Payslips of an employee, newest issue date first."""
        return await self.pay_slips.find_by_employee(employee_id)

    async def latest_for_employee(self, employee_id: int) -> PaySlip:
        """Most recently issued payslip of an employee."""
        pay_slips = await self.pay_slips.find_by_employee(employee_id)
        if not pay_slips:
            raise NotFoundError("PaySlip", "employee_id", employee_id)
        return pay_slips[0]

    async def list_all(self) -> list[PaySlip]:
        """All payslips, newest issue date first."""
        return await self.pay_slips.find_all()
