"""Rules summary for the terminal game."""

from __future__ import annotations

from dragonsolitaire.cards.dungeon import ENEMIES, PIT_TRAPS
from dragonsolitaire.config import FATE_CRITICAL, MAX_HEIGHT, MAX_WIDTH


class RuleExplainer:
    """Generates the rules shown before a run."""

    def explain_rules(self) -> str:
        """Return the condensed rules, built from the card registry."""
        lines: list[str] = []

        lines.append("=== DRAGON SOLITAIRE ===")
        lines.append("")
        lines.append(
            f"Explore a dungeon of up to {MAX_WIDTH}x{MAX_HEIGHT} cards. Place the next"
        )
        lines.append("dungeon card next to exactly one resolved (##) card, then resolve it.")
        lines.append("")

        lines.append("CARDS:")
        lines.append("  A♠ Exit: descend a level, or win once the Dragon Queen is defeated")
        for trap in PIT_TRAPS.values():
            extra = ", gems absorb damage" if trap.hidden else ""
            lines.append(f"  {trap.name}{extra}")
        lines.append("  4-6 Passage: resolves when the matching ♣/♠ card is face-up")
        lines.append("  7 Gem, 8 Healing (+2), 9 Treasure Chest (inventory)")
        lines.append("  A♣ Merchant: buy an inventory item for 1 gem")
        lines.append("  Black Joker: Generous Wizard, take an inventory item")
        lines.append("")

        lines.append(f"ENEMIES (draw fate 6-10, {FATE_CRITICAL} is a critical):")
        for enemy in ENEMIES.values():
            rewards = ", ".join(
                f"{reward.amount} {reward.kind.value.replace('_', ' ')}"
                for reward in enemy.critical_rewards
            )
            lines.append(
                f"  {enemy.name}: needs {enemy.min_fate_to_defeat}+, "
                f"hits for {enemy.damage}, critical: {rewards}"
            )
        lines.append("")

        lines.append("WIN: defeat the Dragon Queen with a critical, then take an Exit.")
        lines.append("LOSE: run out of health.")

        return "\n".join(lines)
