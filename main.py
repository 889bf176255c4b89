#!/usr/bin/env python3
"""
glowtrace - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from glowtrace.renderer import Renderer, RenderSettings, get_platform_info
from glowtrace.scene_parser import SceneParseError, load_scene
from glowtrace.scenes import SCENES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='glowtrace - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene cornell --output render.png
  python main.py --width 200 --height 200 --samples 50 --seed 1 --output small.png
  python main.py --scene scenes/mirror.yaml --processes --output mirror.png
        '''
    )

    parser.add_argument('--scene', type=str, default='cornell',
                        help=f"Built-in scene ({', '.join(SCENES)}) or a YAML/JSON scene file")
    parser.add_argument('--width', type=int, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, help='Image height (default: 400)')
    parser.add_argument('--samples', type=int, help='Rays per pixel (default: 100)')
    parser.add_argument('--bounces', type=int, help='Max bounce count (default: 10)')
    parser.add_argument('--threads', type=int, help='Number of workers (0=auto)')
    parser.add_argument('--processes', action='store_true', help='Use worker processes instead of threads')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible render')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def load(args: argparse.Namespace):
    """Resolve the scene, camera and settings, with CLI flags taking priority."""
    if args.scene in SCENES:
        make_scene, make_camera = SCENES[args.scene]
        scene, camera, settings = make_scene(), make_camera(), RenderSettings()
    else:
        scene, camera, settings = load_scene(args.scene)

    overrides = {
        'width': args.width,
        'height': args.height,
        'rays_per_pixel': args.samples,
        'max_bounce_count': args.bounces,
        'num_threads': args.threads,
        'seed': args.seed,
    }
    values = dict(vars(settings))
    values.update({k: v for k, v in overrides.items() if v is not None})
    if args.processes:
        values['use_processes'] = True
    return scene, camera, RenderSettings(**values)


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.info:
        info = get_platform_info()
        print("glowtrace Platform Info:")
        print(f"  System: {info['system']}")
        print(f"  Machine: {info['machine']}")
        print(f"  Python: {info['python_version']}")
        print(f"  NumPy: {info['numpy_version']}")
        print(f"  CPU Cores: {info['cpu_count']}")
        return 0

    try:
        scene, camera, settings = load(args)
    except (SceneParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=" * 60)
    print("glowtrace Path Tracer")
    print("=" * 60)

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Rays per pixel: {settings.rays_per_pixel}")
    print(f"  Max Bounces: {settings.max_bounce_count}")
    print(f"  Workers: {settings.num_threads} ({'processes' if settings.use_processes else 'threads'})")
    print(f"  Seed: {settings.seed if settings.seed is not None else 'random'}")
    print(f"\nScene: {args.scene} ({scene.summary()})")

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(scene, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Rays per second: {(settings.width * settings.height * settings.rays_per_pixel) / max(elapsed, 1e-9):.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
