"""
CLI for building and iterating on container images.
Thin wrapper over LocalBuilder and DevLoop.
"""
import asyncio
import logging
import os
import sys
from typing import Optional

import click

from ..build.local.builder import LocalBuilder
from ..config.artifacts import DEFAULT_TAG_TEMPLATE, generate_tags, load_artifacts
from ..config.global_config_loader import GlobalConfig, load_global_config
from ..dev import DevLoop
from ..utils.config_reader import is_url, read_configuration
from ..watch.triggers import new_trigger


def _setup_logging(log_level: str):
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _echo_warning(fmt: str, *args):
    click.echo(f"WARN: {fmt % args if args else fmt}", err=True)


def _load_config(config_path: Optional[str]) -> GlobalConfig:
    if config_path:
        content = asyncio.run(read_configuration(config_path))
        return GlobalConfig.from_text(content.decode('utf-8'))
    return load_global_config()


def _base_dir(config_path: Optional[str]) -> str:
    if config_path and not is_url(config_path):
        return os.path.dirname(os.path.abspath(config_path))
    return os.getcwd()


@click.group()
def cli():
    """Build container images and rebuild them on change"""
    pass


@cli.command()
@click.option('--config', 'config_path', default=None, help='Path or URL of the devloop YAML')
@click.option('--push/--no-push', default=None, help='Push images instead of tagging them locally')
@click.option('--tag-template', default=DEFAULT_TAG_TEMPLATE, help='Base tag, $IMAGE_NAME is replaced')
@click.option('--log-level', default='INFO', help='Log level')
def build(config_path: Optional[str], push: Optional[bool], tag_template: str, log_level: str):
    """Build every artifact once"""
    _setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        global_cfg = _load_config(config_path)
        if push is not None:
            global_cfg.build.push = push

        artifacts = load_artifacts(global_cfg, _base_dir(config_path))
        tags = generate_tags(artifacts, tag_template)
        builder = LocalBuilder.from_config(global_cfg.build, warner=_echo_warning)

        results = asyncio.run(builder.build(sys.stdout, tags, artifacts))
    except Exception as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        raise click.ClickException(str(e))

    click.echo(f"\n{'='*80}")
    click.echo(f"Built {len(results)} artifacts")
    for result in results:
        click.echo(f"   - {result.image_name}: {result.tag}")
    click.echo(f"{'='*80}\n")


@cli.command()
@click.option('--config', 'config_path', default=None, help='Path or URL of the devloop YAML')
@click.option('--push/--no-push', default=None, help='Push images instead of tagging them locally')
@click.option('--tag-template', default=DEFAULT_TAG_TEMPLATE, help='Base tag, $IMAGE_NAME is replaced')
@click.option('--trigger', default=None, type=click.Choice(['polling', 'notify']), help='How changes are detected')
@click.option('--log-level', default='INFO', help='Log level')
def dev(config_path: Optional[str], push: Optional[bool], tag_template: str, trigger: Optional[str], log_level: str):
    """Build every artifact, then rebuild on file changes"""
    _setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        global_cfg = _load_config(config_path)
        if push is not None:
            global_cfg.build.push = push

        artifacts = load_artifacts(global_cfg, _base_dir(config_path))
        tags = generate_tags(artifacts, tag_template)
        builder = LocalBuilder.from_config(global_cfg.build, warner=_echo_warning)
    except Exception as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        raise click.ClickException(str(e))

    watch_cfg = global_cfg.watch
    watch_trigger = new_trigger(
        trigger or watch_cfg.trigger,
        paths=sorted({artifact.workspace for artifact in artifacts}),
        interval=watch_cfg.poll_interval,
        debounce=watch_cfg.debounce
    )
    loop = DevLoop(builder, artifacts, tags, sys.stdout, watch_trigger)

    try:
        asyncio.run(loop.run())
    except KeyboardInterrupt:
        click.echo("\nStopped")
    except Exception as e:
        logger.error(f"Dev loop failed: {e}", exc_info=True)
        raise click.ClickException(str(e))


def main():
    cli()


if __name__ == '__main__':
    main()
