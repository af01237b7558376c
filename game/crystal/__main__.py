"""
Play Crystal Quest in an Arcade window.

    python -m game.crystal [--width 1024] [--height 768] [--seed 7] [--mute]
"""

import argparse
import logging
import random

from .session import GameSession
from .tuning import DEFAULT_TUNING_PATH, JsonTuningStore, MemoryTuningStore, Tuning


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Crystal Quest")
    parser.add_argument("--width", type=int, default=1024, help="Window width (default: 1024)")
    parser.add_argument("--height", type=int, default=768, help="Window height (default: 768)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for level generation")
    parser.add_argument(
        "--tuning-file",
        type=str,
        default=DEFAULT_TUNING_PATH,
        help=f"Where live tuning is saved (default: {DEFAULT_TUNING_PATH})",
    )
    parser.add_argument("--no-save", action="store_true", help="Do not load or save tuning")
    parser.add_argument("--mute", action="store_true", help="Start with sound muted")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    store = MemoryTuningStore() if args.no_save else JsonTuningStore(args.tuning_file)
    tuning = Tuning(store=store)
    applied = tuning.load()
    if applied:
        print(f"[tuning] Loaded {len(applied)} saved value(s) from {args.tuning_file}")

    session = GameSession(args.width, args.height, config=tuning.config, rng=random.Random(args.seed))

    # arcade needs a display; keep it out of headless imports
    import arcade
    from .window import ArcadeAudio, CrystalQuestWindow

    CrystalQuestWindow(session, args.width, args.height, tuning=tuning, audio=ArcadeAudio(muted=args.mute))
    arcade.run()


if __name__ == "__main__":
    main()
