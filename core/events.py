"""
core.events
Event model + per-scenario catalogs.

- classic / student / startup: hand-authored, static
- custom: runtime deck (generation service) + two structural events
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .state import EffectDelta, StatVector

EVENT_TAGS = ("career", "lifestyle", "social", "finance", "risk")

Condition = Callable[[StatVector], bool]


@dataclass(frozen=True)
class EventChoice:
    id: str
    label: str
    effects: EffectDelta
    log: str
    explain: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "effects": self.effects.to_dict(),
            "log": self.log,
        }
        if self.explain:
            d["explain"] = self.explain
        return d


@dataclass(frozen=True)
class GameEvent:
    id: str
    title: str
    description: str
    tag: str
    choices: Tuple[EventChoice, ...]
    condition: Optional[Condition] = field(default=None, compare=False)
    weight: Optional[float] = None
    cooldown: Optional[int] = None

    def is_eligible(self, stats: StatVector) -> bool:
        return self.condition is None or bool(self.condition(stats))

    def get_choice(self, choice_id: str) -> Optional[EventChoice]:
        return next((c for c in self.choices if c.id == str(choice_id)), None)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form. Conditions are code and are not exported."""
        d: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tag": self.tag,
            "choices": [c.to_dict() for c in self.choices],
        }
        if self.weight is not None:
            d["weight"] = self.weight
        if self.cooldown is not None:
            d["cooldown"] = self.cooldown
        return d


def _choice(cid: str, label: str, effects: Mapping[str, float], log: str, explain: Optional[str] = None) -> EventChoice:
    return EventChoice(id=cid, label=label, effects=EffectDelta.from_mapping(effects), log=log, explain=explain)


def _can_pay_debt(s: StatVector) -> bool:
    return s.savings >= 1000 and s.debt > 0


def _debt_event(event_id: str, title: str, description: str, noun: str, explains: Sequence[Optional[str]] = (None, None, None)) -> GameEvent:
    return GameEvent(
        id=event_id,
        title=title,
        description=description,
        tag="finance",
        cooldown=2,
        condition=_can_pay_debt,
        choices=(
            _choice(
                "pay-500",
                "Pay $500 from savings to reduce debt",
                {"savings": -500, "debt": -500, "stress": -2, "happiness": 2},
                f"You made an extra payment and reduced your {noun}.",
                explains[0],
            ),
            _choice(
                "pay-1000",
                "Pay $1000 from savings to reduce debt",
                {"savings": -1000, "debt": -1000, "stress": -4, "happiness": 4},
                f"You made a large payment and significantly reduced your {noun}.",
                explains[1],
            ),
            _choice("skip", "Skip payment (no change)", {}, "You skipped a payment this month.", explains[2]),
        ),
    )


# =========================
# Structural events (always present in custom play)
# =========================

DEBT_EVENT_ID = "pay-debt-custom"
EXPENSE_EVENT_ID = "cut-expense-custom"
STRUCTURAL_EVENT_IDS = (DEBT_EVENT_ID, EXPENSE_EVENT_ID)


def structural_events() -> List[GameEvent]:
    debt_event = _debt_event(
        DEBT_EVENT_ID,
        "Debt Repayment Opportunity",
        "You have enough savings to pay down your debt.",
        "debt",
        (
            "Paying $500 now lowers your debt balance and slightly reduces stress, at the cost of using some savings.",
            "A larger lump-sum payment cuts your debt faster, easing stress more, but uses more of your savings.",
            "You keep your savings intact this month, but your debt doesn't shrink and interest may keep stress elevated.",
        ),
    )
    expense_event = GameEvent(
        id=EXPENSE_EVENT_ID,
        title="Cut Recurring Expenses",
        description="You have a chance to reduce your recurring bills or fixed expenses.",
        tag="finance",
        cooldown=4,
        choices=(
            _choice(
                "cut-100",
                "Negotiate and cut fixed expenses by $100",
                {"fixed_expenses": -100, "stress": 1, "happiness": 1},
                "You successfully negotiated your bills and reduced your fixed expenses.",
                "Lower monthly bills improve your budget a bit and feel like a win, slightly boosting mood.",
            ),
            _choice(
                "cut-200",
                "Switch to a cheaper plan (cut $200, -2 happiness)",
                {"fixed_expenses": -200, "happiness": -2},
                "You switched to a cheaper plan and saved money, but lost some perks.",
                "A bigger monthly saving improves your budget more, but losing perks makes you a bit less happy.",
            ),
            _choice(
                "skip",
                "Do nothing",
                {},
                "You decided not to change your bills this month.",
                "You avoid any hassle now, but your ongoing bills continue unchanged.",
            ),
        ),
    )
    return [debt_event, expense_event]


# =========================
# Classic pack
# =========================

CLASSIC_EVENTS: Tuple[GameEvent, ...] = (
    _debt_event("pay-debt", "Debt Repayment Opportunity", "You have enough savings to pay down your debt.", "debt"),
    GameEvent(
        id="negotiate-bills",
        title="Negotiate Bills",
        description="You have a chance to negotiate your recurring bills or switch to a cheaper plan.",
        tag="finance",
        cooldown=4,
        choices=(
            _choice("negotiate", "Negotiate and cut fixed expenses by $100", {"fixed_expenses": -100, "stress": 1, "happiness": 1},
                    "You successfully negotiated your bills and reduced your fixed expenses."),
            _choice("switch", "Switch to a cheaper plan (cut $200, -2 happiness)", {"fixed_expenses": -200, "happiness": -2},
                    "You switched to a cheaper plan and saved money, but lost some perks."),
            _choice("skip", "Do nothing", {}, "You decided not to change your bills this month."),
        ),
    ),
    GameEvent(
        id="side-gig",
        title="Side Gig Opportunity",
        description="A friend offers you a weekend side gig. It pays, but you'll have less free time.",
        tag="career",
        cooldown=3,
        choices=(
            _choice("accept", "Accept the side gig (+$200, +5 stress)", {"savings": 200, "stress": 5},
                    "You worked the side gig and earned extra cash, but it was tiring.",
                    "Taking the gig brings in extra money but costs time and energy, increasing stress."),
            _choice("decline", "Decline (no change)", {}, "You declined the side gig and kept your free time.",
                    "You preserve your free time and avoid extra stress, but miss out on extra income."),
        ),
    ),
    GameEvent(
        id="impulse-buy",
        title="Impulse Buy Temptation",
        description="You see a gadget on sale that you don't really need.",
        tag="risk",
        cooldown=2,
        condition=lambda s: s.savings > 100,
        choices=(
            _choice("buy", "Buy it (-$100, +10 happiness, +10 impulse)", {"savings": -100, "happiness": 10, "impulse": 10},
                    "You bought the gadget. It's fun, but your wallet is lighter.",
                    "Purchasing gives a short-term happiness boost but reduces savings and reinforces impulsive spending."),
            _choice("skip", "Skip (-5 impulse, +2 stress)", {"impulse": -5, "stress": 2},
                    "You resisted the urge, but it took some willpower.",
                    "Resisting builds discipline (lower impulse) but costs a bit of willpower, adding slight stress."),
        ),
    ),
    GameEvent(
        id="unexpected-bill",
        title="Unexpected Bill",
        description="A surprise medical bill arrives.",
        tag="finance",
        cooldown=4,
        choices=(
            _choice("pay", "Pay from savings (-$300, +5 stress)", {"savings": -300, "stress": 5},
                    "You paid the bill from your savings.",
                    "Covering the bill immediately reduces savings and feels stressful in the short term."),
            _choice("defer", "Defer payment (+$300 debt, +10 stress)", {"debt": 300, "stress": 10},
                    "You deferred the bill, but your debt increased.",
                    "Delaying payment avoids a savings hit now, but raises your debt and worry about future costs."),
        ),
    ),
    GameEvent(
        id="rent-change",
        title="Housing Decision",
        description="Your lease is up. You can upgrade, keep your current place, or find a roommate.",
        tag="lifestyle",
        cooldown=6,
        choices=(
            _choice("upgrade", "Upgrade apartment (+$400 fixed expenses, +8 happiness)", {"fixed_expenses": 400, "happiness": 8},
                    "You upgraded your apartment. Nicer place, higher costs.",
                    "A nicer home lifts mood but increases monthly costs, tightening your budget."),
            _choice("same", "Stay put (no change)", {}, "You renewed your current lease.",
                    "Sticking with your current place keeps both costs and comfort unchanged."),
            _choice("roommate", "Get a roommate (-$300 fixed expenses, -5 happiness)", {"fixed_expenses": -300, "happiness": -5},
                    "You found a roommate and cut expenses, but it's less private.",
                    "Sharing housing lowers monthly costs, but reduced privacy may lower happiness."),
        ),
    ),
    GameEvent(
        id="annual-raise",
        title="Performance Review",
        description="Your manager offers more responsibilities for a raise.",
        tag="career",
        cooldown=6,
        choices=(
            _choice("accept", "Accept (+$200 income, +5 stress)", {"income": 200, "stress": 5},
                    "You took on more responsibilities and got a raise.",
                    "Greater responsibility brings more pay but also more pressure and stress."),
            _choice("decline", "Decline (no change)", {}, "You kept your current role.",
                    "You avoid added stress but forgo a pay increase, keeping your situation stable."),
        ),
    ),
)


# =========================
# Student pack
# =========================

STUDENT_EVENTS: Tuple[GameEvent, ...] = (
    _debt_event(
        "pay-debt-student",
        "Student Loan Payment Opportunity",
        "You have enough savings to pay down your student loan.",
        "student loan",
        (
            "Paying extra reduces your loan balance sooner and eases stress, but uses savings.",
            "A larger payment lowers your loan faster, easing stress more, but costs more savings now.",
            "You keep cash on hand, but your loan balance doesn't go down.",
        ),
    ),
    GameEvent(
        id="find-roommate",
        title="Find a Roommate",
        description="You consider finding a roommate to help cut down your rent.",
        tag="lifestyle",
        cooldown=6,
        choices=(
            _choice("find", "Find a roommate (cut $200 fixed expenses, -2 happiness)", {"fixed_expenses": -200, "happiness": -2, "stress": 1},
                    "You found a roommate and reduced your rent, but lost some privacy.",
                    "Splitting rent lowers monthly bills, but less privacy can reduce happiness a bit."),
            _choice("skip", "Stay solo (no change)", {}, "You decided to keep your place to yourself.",
                    "You keep your privacy and routine, but your rent stays the same."),
        ),
    ),
    GameEvent(
        id="textbooks",
        title="Textbooks Needed",
        description="A new semester starts and you need textbooks.",
        tag="finance",
        cooldown=4,
        choices=(
            _choice("buy-new", "Buy new (-$250)", {"savings": -250}, "You bought new textbooks.",
                    "New books are convenient but cost more, reducing savings."),
            _choice("buy-used", "Buy used (-$120, +2 stress)", {"savings": -120, "stress": 2},
                    "You hunted for used textbooks and saved money.",
                    "Used books cost less but take effort to find, adding a bit of stress."),
            _choice("borrow", "Borrow from library (0$, +5 stress)", {"stress": 5},
                    "You borrowed textbooks and deal with limited time slots.",
                    "Borrowing saves money but the limited access can be stressful."),
        ),
    ),
    GameEvent(
        id="campus-job",
        title="Campus Job Opening",
        description="The library offers a part-time position.",
        tag="career",
        cooldown=3,
        choices=(
            _choice("apply", "Apply (+$150 savings, +5 stress)", {"savings": 150, "stress": 5},
                    "You got the campus job and earn a little extra.",
                    "Working adds income but takes time away, increasing stress."),
            _choice("skip", "Focus on studies (+2 happiness)", {"happiness": 2}, "You focused on studies instead.",
                    "Focusing on studies preserves energy and can lift mood, but you miss out on extra income."),
        ),
    ),
    GameEvent(
        id="roommate-conflict",
        title="Roommate Conflict",
        description="Your roommate is late on rent.",
        tag="lifestyle",
        cooldown=5,
        choices=(
            _choice("cover", "Cover their part this month (-$250, +5 stress)", {"savings": -250, "stress": 5},
                    "You covered the rent and will talk later.",
                    "Helping out strains your savings and adds stress, but keeps the household stable this month."),
            _choice("landlord", "Talk to landlord (+5 stress, potential future change)", {"stress": 5},
                    "You informed the landlord.",
                    "Addressing the issue can be stressful now but may lead to a longer-term solution."),
        ),
    ),
)


# =========================
# Startup pack
# =========================

STARTUP_EVENTS: Tuple[GameEvent, ...] = (
    _debt_event(
        "pay-debt-startup",
        "Business Loan Payment Opportunity",
        "You have enough savings to pay down your business loan.",
        "business loan",
        (
            "Paying down principal reduces future interest and can ease stress a bit.",
            "A bigger payment accelerates debt reduction and relief, using more cash now.",
            "You retain liquidity this month, but the loan balance remains.",
        ),
    ),
    GameEvent(
        id="cut-office-costs",
        title="Cut Office Costs",
        description="You consider moving to a smaller office or switching to remote work to cut fixed expenses.",
        tag="lifestyle",
        cooldown=6,
        choices=(
            _choice("move-remote", "Switch to remote work (cut $300 fixed expenses, -2 happiness)", {"fixed_expenses": -300, "happiness": -2, "stress": 1},
                    "You switched to remote work and reduced your office costs.",
                    "Cutting office overhead improves runway, though being away from an office can reduce morale for some."),
            _choice("downsize", "Move to a smaller office (cut $150 fixed expenses, -1 happiness)", {"fixed_expenses": -150, "happiness": -1},
                    "You moved to a smaller office and saved on rent.",
                    "A smaller space saves money but can feel like a downgrade, nudging happiness down slightly."),
            _choice("skip", "Keep current office (no change)", {}, "You kept your current office setup.",
                    "No immediate changes. Costs and comfort remain as they are."),
        ),
    ),
    GameEvent(
        id="pitch-trip",
        title="Investor Pitch Trip",
        description="Travel to pitch investors.",
        tag="career",
        cooldown=4,
        choices=(
            _choice("go", "Go (-$300 savings, +10 stress, chance for future raise)", {"savings": -300, "stress": 10},
                    "You traveled and pitched the startup.",
                    "Travel costs money and energy now, but could open doors that help later."),
            _choice("remote", "Pitch remote (0$, -2 happiness)", {"happiness": -2}, "You pitched remotely to save money.",
                    "Saving cash by staying remote may feel less exciting, slightly lowering happiness."),
        ),
    ),
    GameEvent(
        id="equity-vs-salary",
        title="Equity vs Salary",
        description="Your startup offers more equity for less salary.",
        tag="finance",
        cooldown=6,
        choices=(
            _choice("equity", "Take equity (-$200 income, +5 happiness)", {"income": -200, "happiness": 5},
                    "You chose equity; money is tight now.",
                    "Trading salary for equity can feel motivating but reduces near-term income."),
            _choice("salary", "Keep salary (+$0)", {}, "You kept your current compensation.",
                    "Sticking with salary maintains predictable pay without extra risk."),
        ),
    ),
    GameEvent(
        id="coworking",
        title="Coworking Space",
        description="Rent a desk in a coworking space.",
        tag="lifestyle",
        cooldown=6,
        choices=(
            _choice("rent", "Rent (+$200 fixed expenses, +3 happiness)", {"fixed_expenses": 200, "happiness": 3},
                    "You rented a desk; productivity improved.",
                    "A workspace can boost morale and focus, but raises monthly costs."),
            _choice("home", "Work from home (no change)", {}, "You kept working from home.",
                    "You keep expenses low and flexibility high by staying at home."),
        ),
    ),
)


STATIC_CATALOGS: Dict[str, Tuple[GameEvent, ...]] = {
    "classic": CLASSIC_EVENTS,
    "student": STUDENT_EVENTS,
    "startup": STARTUP_EVENTS,
}


def dedupe_by_id(events: Sequence[GameEvent]) -> List[GameEvent]:
    """Keep one event per id; the last occurrence wins and takes the later position."""
    out: Dict[str, GameEvent] = {}
    for ev in events:
        out.pop(ev.id, None)
        out[ev.id] = ev
    return list(out.values())


class EventCatalog:
    """Per-session catalog lookup.

    Owns the runtime custom deck so parallel sessions (and tests) never share
    it. Static packs are module-level tuples and are never mutated.
    """

    def __init__(self, custom_events: Optional[Sequence[GameEvent]] = None) -> None:
        self._generated: List[GameEvent] = []
        self._custom: List[GameEvent] = []
        if custom_events is not None:
            self.set_custom_events(custom_events)

    def set_custom_events(self, events: Optional[Sequence[GameEvent]]) -> None:
        """Replace the whole custom catalog; structural events are always appended."""
        generated = [ev for ev in (events or []) if isinstance(ev, GameEvent)]
        self._generated = list(generated)
        self._custom = dedupe_by_id([*generated, *structural_events()])

    @property
    def custom_events(self) -> List[GameEvent]:
        return list(self._custom)

    @property
    def generated_events(self) -> List[GameEvent]:
        """The supplied deck only (what gets persisted)."""
        return list(self._generated)

    def events_for(self, scenario_id: Optional[str]) -> Sequence[GameEvent]:
        if scenario_id == "custom":
            return self._custom
        return STATIC_CATALOGS.get(str(scenario_id or ""), CLASSIC_EVENTS)
