"""Integration test with the study example economy."""
import sys
import os

# Ensure examples can be imported
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from examples.study_example import attach_knowledge_bonus, define_game
from idleeconomy.decimal_value import DecimalValue
from idleeconomy.formatting import format_status, format_text_report
from idleeconomy.runtime import Economy
from idleeconomy.simulation import Simulation


def test_study_game_validates():
    defn = define_game()
    errors = defn.validate()
    assert errors == [], f"Validation errors: {errors}"


def test_study_game_simulation():
    defn = define_game()
    sim = Simulation(defn, duration=600, clicks_per_second=5)
    result = sim.run()

    counts = result.purchase_counts()
    assert counts["student"] > 0
    assert result.first_purchase_time("student") <= 2.0

    text = format_text_report(result, title=defn.config.name)
    assert "Study Example" in text
    assert "student" in text


def test_professor_unlocks_knowledge():
    economy = Economy(define_game())
    assert not economy.ledger.is_unlocked("knowledge")

    economy.ledger.set_amount("studyPoints", 2000)
    assert economy.try_purchase("student", 1)
    assert economy.try_purchase("classroom", 1)
    assert economy.try_purchase("professor", 1)

    assert economy.ledger.is_unlocked("knowledge")
    assert economy.ledger.is_visible("knowledge")
    economy.tick(10)
    assert economy.get_amount("knowledge") == 1
    assert "knowledge" in format_status(economy)


def test_knowledge_bonus_tracks_balance():
    economy = Economy(define_game())
    economy.ledger.set_amount("studyPoints", 10)
    assert economy.try_purchase("student", 1)
    attach_knowledge_bonus(economy)

    assert economy.tick(1)["studyPoints"] == DecimalValue("0.5")

    economy.ledger.unlock_resource("knowledge")
    economy.ledger.set_amount("knowledge", 100)
    assert economy.tick(1)["studyPoints"] == 1


def test_knowledge_bonus_skips_knowledge_producers():
    economy = Economy(define_game())
    economy.ledger.set_amount("studyPoints", 2000)
    for pid in ("student", "classroom", "professor"):
        assert economy.try_purchase(pid, 1)
    attach_knowledge_bonus(economy)
    economy.ledger.set_amount("knowledge", 100)

    economy.tick(1)
    assert economy.get_total_production_rate("knowledge") == DecimalValue("0.1")
    # (0.5 + 4) doubled by 100 knowledge
    assert economy.get_total_production_rate("studyPoints") == 9
