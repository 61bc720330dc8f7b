"""Human-readable reconstruction of an evaluation's arithmetic."""

from typing import Sequence

from actionroll.models import BonusEntry, DiceGroupResult, ModifierEntry


def _fmt_number(value: float) -> str:
    return f"{value:g}"


def _fmt_signed(value: int, label: str) -> str:
    if value == 0:
        return f"({label})"
    sign = "+" if value > 0 else "-"
    return f" {sign} {abs(value)}({label})"


def _fmt_faces(faces: Sequence[int], sep: str) -> str:
    return sep.join(str(face) for face in faces)


def render_expression(
    dice_groups: Sequence[DiceGroupResult],
    bonuses: Sequence[BonusEntry],
    modifiers: Sequence[ModifierEntry],
    explosion_rolls: Sequence[int],
) -> str:
    """
    Build the display string, e.g.
    ``(2d100[40 + 50] + 30(B MR) + 20(C WR)) × 1.2(Base multiplier 1.2x)``.

    Order is fixed: dice groups, one aggregated explosion block, bonuses, then
    modifiers. Explosion modifiers are not repeated after the EXP block.
    """
    parts = []

    for group in dice_groups:
        if group.kept is not None:
            parts.append(f"{group.label}[{_fmt_faces(group.rolls, ', ')}→{_fmt_faces(group.kept, ', ')}]")
        else:
            parts.append(f"{group.label}[{_fmt_faces(group.rolls, ' + ')}]")

    if explosion_rolls:
        triggers = sum(m.triggers or 0 for m in modifiers if m.kind == "explosion")
        parts.append(f"EXP[{_fmt_faces(explosion_rolls, ' + ')}]({triggers} explosions)")

    for bonus in bonuses:
        if bonus.value > 0:
            parts.append(f"{bonus.value}({bonus.label})")

    expression = " + ".join(parts) or "0"

    for modifier in modifiers:
        if modifier.multiplier not in (0, 1):
            expression = f"({expression}) × {_fmt_number(modifier.multiplier)}({modifier.description})"
        elif modifier.kind == "bonus_conversion" and modifier.extra_rolls:
            expression += f" + CONV[{_fmt_faces(modifier.extra_rolls, ' + ')}]"
            # Leftover bonus minus the bonus spent, already counted above
            expression += _fmt_signed(modifier.added_value - sum(modifier.extra_rolls), modifier.description)
        elif modifier.added_value != 0 and modifier.kind != "explosion":
            expression += _fmt_signed(modifier.added_value, modifier.description)

    return expression
