"""
Purchase/Use Transaction Controller

Decides whether a powerup may be bought, asks the player to confirm, then
spends coins and applies the effect in that order. One controller serves one
UI session and runs at most one purchase at a time.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Awaitable, Callable, Optional, Protocol, Tuple

from powerup_economy.catalog import PowerupDefinition, lookup
from powerup_economy.ledger import Ledger
from powerup_economy.schemas import (
    ButtonState, ConfirmationPrompt, ConfirmationRequired, Declined,
    EffectApplicationAnomaly, GamePhase, Ineligible, IneligibleReason,
    InsufficientFunds, PowerupApplied, PowerupKind,
)

logger = logging.getLogger(__name__)

EffectCallback = Callable[[PowerupKind], Awaitable[bool]]


class ConfirmationSurface(Protocol):
    async def ask(self, prompt: ConfirmationPrompt) -> bool:
        ...


class Notifier(Protocol):
    def notify(self, title: str, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier for hosts without a screen to show notices on"""

    def notify(self, title: str, message: str) -> None:
        logger.info(f"{title}: {message}")


def confirmation_prompt(definition: PowerupDefinition) -> ConfirmationPrompt:
    return ConfirmationPrompt(
        title=f"Use {definition.display_name}?",
        description=f"{definition.effect_description}\n\nPrice: {definition.price} coins",
        price=definition.price,
    )


class PowerupController:
    """Runs powerup purchases for one UI session"""

    def __init__(self, ledger: Ledger, apply_effect: EffectCallback,
                 notifier: Optional[Notifier] = None):
        self.ledger = ledger
        self.apply_effect = apply_effect
        self.notifier = notifier or LoggingNotifier()
        self.in_flight = False
        # Only one dialog can be open, so only the newest confirmation is live
        self._pending: Optional[Tuple[str, PowerupKind]] = None

    def _gate(self, phase: GamePhase, is_ui_disabled: bool) -> Optional[IneligibleReason]:
        if is_ui_disabled:
            return IneligibleReason.UI_DISABLED
        if phase != GamePhase.PLAYING:
            return IneligibleReason.NOT_PLAYING
        if self.in_flight:
            return IneligibleReason.BUSY
        return None

    def button_state(self, kind: PowerupKind, phase: GamePhase, balance: int,
                     is_ui_disabled: bool = False) -> ButtonState:
        """How the powerup bar should draw the button for this kind"""
        if self._gate(phase, is_ui_disabled) is not None:
            return ButtonState.DISABLED
        if balance >= lookup(kind).price:
            return ButtonState.CAN_BUY
        return ButtonState.UNAFFORDABLE

    def request_powerup(self, kind: PowerupKind, phase: GamePhase, balance: int,
                        is_ui_disabled: bool = False):
        """Check eligibility and affordability for a powerup request

        Returns Ineligible, InsufficientFunds or ConfirmationRequired. Nothing
        is spent here; a ConfirmationRequired outcome must be resolved with
        resolve_confirmation once the player has answered.
        """
        reason = self._gate(phase, is_ui_disabled)
        if reason is not None:
            return Ineligible(reason=reason)

        definition = lookup(kind)
        if balance < definition.price:
            outcome = InsufficientFunds(
                kind=definition.kind,
                price=definition.price,
                balance=balance,
                title="Insufficient Coins",
                message=f"You need {definition.price} coins to use {definition.display_name}.",
            )
            self.notifier.notify(outcome.title, outcome.message)
            return outcome

        prompt = confirmation_prompt(definition)
        confirmation_id = uuid.uuid4().hex
        self._pending = (confirmation_id, definition.kind)
        return ConfirmationRequired(
            confirmation_id=confirmation_id,
            kind=definition.kind,
            price=definition.price,
            title=prompt.title,
            description=prompt.description,
        )

    async def resolve_confirmation(self, confirmation_id: str, confirmed: bool):
        """Apply the player's answer to an earlier ConfirmationRequired"""
        if self._pending is None or self._pending[0] != confirmation_id:
            return Ineligible(reason=IneligibleReason.UNKNOWN_CONFIRMATION)
        kind = self._pending[1]
        self._pending = None
        if not confirmed:
            return Declined(kind=kind)
        return await self.confirm_purchase(kind)

    def discard_confirmation(self):
        """Forget the unanswered confirmation, if any"""
        self._pending = None

    @contextmanager
    def _in_flight_guard(self):
        self.in_flight = True
        try:
            yield
        finally:
            self.in_flight = False

    async def confirm_purchase(self, kind: PowerupKind):
        """Spend coins for a confirmed powerup, then apply its effect"""
        # No await between the check and the guard, so two confirmations
        # cannot both get past here.
        if self.in_flight:
            return Ineligible(reason=IneligibleReason.BUSY)

        definition = lookup(kind)
        with self._in_flight_guard():
            spent = await self.ledger.spend(definition.price, memo=f"powerup:{definition.kind.value}")
            if not spent:
                balance = await self.ledger.balance()
                self.notifier.notify("Purchase Failed", "Not enough coins!")
                return InsufficientFunds(
                    kind=definition.kind,
                    price=definition.price,
                    balance=balance,
                    title="Purchase Failed",
                    message="Not enough coins!",
                )

            # Coins are gone from here on; failures are reported, never refunded
            try:
                applied = await self.apply_effect(definition.kind)
            except Exception as e:
                logger.exception(f"Effect {definition.kind.value} raised after {definition.price} coins were spent")
                return EffectApplicationAnomaly(
                    kind=definition.kind, price=definition.price, detail=str(e) or type(e).__name__
                )

            if not applied:
                logger.error(f"Effect {definition.kind.value} failed after {definition.price} coins were spent")
                return EffectApplicationAnomaly(
                    kind=definition.kind, price=definition.price, detail="Effect callback reported failure"
                )

            logger.info(f"Applied {definition.display_name} for {definition.price} coins")
            return PowerupApplied(kind=definition.kind, price=definition.price)

    async def purchase(self, kind: PowerupKind, phase: GamePhase, balance: int,
                       is_ui_disabled: bool, surface: ConfirmationSurface):
        """Full request, confirm and spend flow against a confirmation surface"""
        outcome = self.request_powerup(kind, phase, balance, is_ui_disabled)
        if not isinstance(outcome, ConfirmationRequired):
            return outcome
        confirmed = await surface.ask(outcome.prompt())
        return await self.resolve_confirmation(outcome.confirmation_id, confirmed)
