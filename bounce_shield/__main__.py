"""Play Bounce Shield in a window.

Controls:
- Left/Right or A/D: move the bar
- P / Escape: pause and resume
- R: restart after game over
- F: toggle fullscreen
- Close the window to quit
"""
import argparse
import logging

import pygame

from .audio import SoundManager
from .config import DEFAULT_CONFIG, MilestonePolicy
from .renderer import Renderer
from .session import GameSession, InputState

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="bounce_shield", description="Bounce the ball, shield the floor.")
    parser.add_argument("--seed", type=int, default=None, help="seed for ball spawns and power-ups")
    parser.add_argument("--width", type=int, default=DEFAULT_CONFIG.screen_width)
    parser.add_argument("--height", type=int, default=DEFAULT_CONFIG.screen_height)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument(
        "--milestones",
        choices=[p.value for p in MilestonePolicy],
        default=DEFAULT_CONFIG.milestone_policy.value,
        help="heart reward policy",
    )
    parser.add_argument("--mute", action="store_true", help="disable sound")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def read_input(events):
    pressed = {event.key for event in events if event.type == pygame.KEYDOWN}
    keys = pygame.key.get_pressed()
    return InputState(
        left=keys[pygame.K_LEFT] or keys[pygame.K_a],
        right=keys[pygame.K_RIGHT] or keys[pygame.K_d],
        pause=bool(pressed & {pygame.K_p, pygame.K_ESCAPE}),
        restart=pygame.K_r in pressed,
        fullscreen=pygame.K_f in pressed,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = DEFAULT_CONFIG.replace(
        screen_width=args.width,
        screen_height=args.height,
        milestone_policy=MilestonePolicy(args.milestones),
    )

    pygame.init()
    pygame.display.set_caption("Bounce Shield")
    window_size = (config.screen_width, config.screen_height)
    screen = pygame.display.set_mode(window_size, pygame.RESIZABLE)
    fullscreen = False
    clock = pygame.time.Clock()

    session = GameSession(config, seed=args.seed)
    renderer = Renderer(screen)
    sounds = SoundManager(enabled=not args.mute)

    running = True
    while running:
        dt = clock.tick(args.fps) / 1000.0

        events = pygame.event.get()
        for event in events:
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE and not fullscreen:
                window_size = (event.w, event.h)
                screen = pygame.display.set_mode(window_size, pygame.RESIZABLE)
                renderer.surface = screen

        inputs = read_input(events)
        if inputs.fullscreen:
            fullscreen = not fullscreen
            if fullscreen:
                screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
            else:
                screen = pygame.display.set_mode(window_size, pygame.RESIZABLE)
            renderer.surface = screen
            logger.info("Fullscreen %s", "on" if fullscreen else "off")

        sounds.handle(session.update(dt, inputs, screen_size=screen.get_size()))
        renderer.draw(session.render_state())
        pygame.display.flip()

    logger.info("Final score %d, high score %d", session.score, session.high_score)
    pygame.quit()


if __name__ == "__main__":
    main()
