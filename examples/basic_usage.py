#!/usr/bin/env python3
"""
Basic Usage Example - Cook Session Engine

This script replays a brisket cook against a fake clock. It shows how to:
- Initialize the engine without persistence
- Create a session from a cook plan
- Drive it with ticks, a pause, a manual step and thermometer readings
- Watch notifications and finalize the cook into a log entry

Run: python examples/basic_usage.py
"""

from typing import Any, Dict

from cook_app.engine import CookSessionEngine
from cook_app.history.models import CookFeedback
from cook_app.logging.config import configure_logging
from cook_app.state.machine import progress
from cook_app.utils.time import FakeClock


def create_brisket_plan() -> Dict[str, Any]:
    """Create a sample plan: smoke, then wrap and probe in parallel branches."""
    return {
        "id": "brisket-demo",
        "title": "Texas Brisket",
        "servings": 12,
        "stages": [
            {
                "key": "smoke",
                "instruction": "Smoke fat side up at 250°F",
                "trigger": "TimeElapsed",
                "expectedDurationMinutes": 360,
                "checkpoints": ["Bark is set", "Color is deep mahogany"],
            },
            {
                "key": "wrap",
                "instruction": "Wrap in butcher paper",
                "trigger": "ManualAdvance",
                "dependsOn": ["smoke"],
            },
            {
                "key": "finish",
                "instruction": "Cook until internal temp hits 203°F",
                "trigger": "TemperatureReached",
                "targetTemperatureF": 203,
                "dependsOn": ["wrap"],
            },
            {
                "key": "rest",
                "instruction": "Rest in a cooler",
                "trigger": "TimeElapsed",
                "expectedDurationMinutes": 60,
                "dependsOn": ["finish"],
            },
        ],
    }


def print_notifications(session, notifications) -> None:
    """Listener printing every notification the engine emits."""
    for notification in notifications:
        line = f"   🔔 {notification.kind.value}"
        if notification.stage_key:
            line += f" [{notification.stage_key}]"
        if notification.instruction:
            line += f" {notification.instruction}"
        if notification.target_temperature_f:
            line += f" (target {notification.target_temperature_f:.0f}°F)"
        print(line)


def print_session_state(engine: CookSessionEngine, clock: FakeClock) -> None:
    """Print current session state."""
    session = engine.session
    summary = progress(session)
    print(f"📊 {clock.now():%H:%M} status={session.status.value} "
          f"active={session.active_stage_key} "
          f"resolved={summary['resolved']}/{summary['total']}")
    remaining = engine.runtime.remaining_seconds()
    if remaining is not None:
        print(f"   ⏱  {remaining / 60:.0f} min left on this stage")


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")
    print("🚀 Cook Session Engine - Basic Usage Demo")
    print("=" * 60)

    clock = FakeClock()
    engine = CookSessionEngine(clock=clock, overrides={"persistence": {"enabled": False}})
    engine.add_listener(print_notifications)

    print("1. Creating the session...")
    engine.create_session(create_brisket_plan(), recipe_id="brisket")
    engine.start()
    print_session_state(engine, clock)

    print("\n2. Smoking, with a tick every hour and a one hour pause...")
    for hour in range(7):
        clock.advance(hours=1)
        if hour == 2:
            engine.pause()
            print("   ⏸  Paused to refuel the firebox")
            continue
        if hour == 3:
            engine.resume()
            print("   ▶️  Resumed")
        engine.tick()
    print_session_state(engine, clock)

    print("\n3. Wrapping...")
    clock.advance(minutes=10)
    engine.advance_manually()

    print("\n4. Probing...")
    for reading in (175, 190, 198, 204):
        clock.advance(minutes=45)
        print(f"   🌡  {reading}°F")
        engine.record_temperature(reading)

    interval = engine.tick_interval_seconds
    print(f"\n5. Resting, ticking every {interval}s like a UI timer would...")
    while not engine.session.is_terminal:
        clock.advance(seconds=interval)
        engine.tick()
    print_session_state(engine, clock)

    print("\n6. Finalizing...")
    entry = engine.finalize(CookFeedback(
        rating=5,
        notes="Great bark, perfect jiggle",
        what_to_improve="Trim the flat thinner",
    ))
    print(f"   Actual cook time: {entry.actual_time_minutes} min (pauses excluded)")
    print(f"   Rating: {entry.rating}/5")
    print()
    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    main()
