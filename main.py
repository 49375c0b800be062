# main.py
"""
Main entry point for the particle field animation.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the visualizer and builds the animation scheduler.
4. Runs the event loop until the window is closed or max_ticks is reached.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
from constants import FPS, DEFAULT_LOG_THROTTLE_TICKS
import cProfile
import pstats
import io


def main():
    """
    The main function to run the animation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Field Starting ---")

    field_params = config.get('particle_field', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from visualization import Visualizer
    from scheduler import AnimationScheduler

    # The visualizer owns the window, so it is the source of viewport bounds.
    visualizer = Visualizer(vis_params)
    scheduler = AnimationScheduler(
        field_params,
        bounds_provider=visualizer.viewport_bounds,
        renderer=visualizer,
        log_throttle_ticks=run_params.get('log_throttle_ticks', DEFAULT_LOG_THROTTLE_TICKS),
    )

    max_ticks = run_params.get('max_ticks')  # None runs until the window is closed
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler:
        profiler.enable()
    scheduler.start()
    while scheduler.running:
        if not visualizer.process_events():
            scheduler.stop()
            break

        scheduler.run_pending()

        if max_ticks is not None and scheduler.tick_count >= max_ticks:
            logging.info(f"Reached max_ticks ({max_ticks}). Stopping animation.")
            scheduler.stop()
            break

        # Caps the event loop; ticks fire on their own interval.
        visualizer.clock.tick(FPS)
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info(
        f"Animation loop finished: {scheduler.tick_count} ticks, "
        f"{scheduler.skipped_ticks} skipped, {scheduler.frame_failures} failed frames."
    )

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)  # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Field Shutting Down ---")


if __name__ == "__main__":
    main()
