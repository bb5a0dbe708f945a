"""
cli/app.py - Targeted refresh CLI

변경된 인스턴스 ID(또는 EventBridge 이벤트)를 받아 연관 리소스까지 참조를 확장하고,
종류별로 최신 상태를 일괄 조회합니다.

Usage:
    aa-refresh refresh -i i-0abc -i i-0def -p my-profile -r ap-northeast-2
    aa-refresh refresh --event event.json --inventory inventory.json -f json -o result.json
    aa-refresh refresh -i i-0abc --no-fetch      # 참조 확장 결과만 출력

옵션:
    -i, --instance-id: 변경된 인스턴스 ID (다중 가능)
    --event: EventBridge 이벤트 JSON 파일
    --inventory: 저장된 인벤토리 스냅샷 JSON 파일
    -p, --profile: AWS 프로파일
    -r, --region: 리전 (기본: AWS_REGION 또는 ap-northeast-2)
    --fetch/--no-fetch: 종류별 조회 수행 여부 (기본: 수행)
    -f, --format: 출력 형식 (console, json)
    -o, --output: 출력 파일 경로 (json 전용)
    -q, --quiet: 최소 출력 모드
"""

import json
import logging
import sys
from pathlib import Path

import boto3
import click
from botocore.exceptions import BotoCoreError, ClientError

from cli.ui import build_summary_table, console, print_error, print_success, print_warning, setup_logging
from core.config import LogConfig, RefreshConfig, get_default_profile, get_default_region, get_version
from core.data.inventory import InMemoryInventoryStore, TargetCollection, instance_seeds, seeds_from_event
from core.exceptions import AAError, format_error_for_user

logger = logging.getLogger(__name__)

VERSION = get_version()


@click.group()
@click.version_option(VERSION, prog_name="aa-refresh")
def cli() -> None:
    """AA Refresh - 변경된 EC2 인스턴스 기준 대상 갱신"""


@cli.command("refresh")
@click.option("-i", "--instance-id", "instance_ids", multiple=True, help="변경된 인스턴스 ID (다중 가능)")
@click.option(
    "--event",
    "event_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="EventBridge 이벤트 JSON 파일",
)
@click.option(
    "--inventory",
    "inventory_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="저장된 인벤토리 스냅샷 JSON 파일",
)
@click.option("-p", "--profile", default=None, help="AWS 프로파일")
@click.option("-r", "--region", default=None, help="리전")
@click.option("--fetch/--no-fetch", default=True, help="종류별 조회 수행 여부")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["console", "json"]),
    default="console",
    help="출력 형식",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="출력 파일 경로")
@click.option("-q", "--quiet", is_flag=True, help="최소 출력 모드")
@click.option("--debug", is_flag=True, help="디버그 로그 출력")
def refresh_command(
    instance_ids: tuple[str, ...],
    event_path: Path | None,
    inventory_path: Path | None,
    profile: str | None,
    region: str | None,
    fetch: bool,
    output_format: str,
    output: Path | None,
    quiet: bool,
    debug: bool,
) -> None:
    """인스턴스 변경 기준으로 연관 리소스 참조를 확장하고 조회"""
    setup_logging(LogConfig(level="WARNING") if quiet else None, debug=debug)

    seeds = instance_seeds(instance_ids)
    if event_path:
        event_seeds = seeds_from_event(_load_event(event_path))
        if not event_seeds:
            print_warning(f"이벤트에서 인스턴스 ID를 찾지 못했습니다: {event_path}")
        seeds.extend(event_seeds)
    if not seeds:
        raise click.UsageError("--instance-id 또는 --event 중 하나는 필요합니다")

    region = region or get_default_region()

    try:
        store = InMemoryInventoryStore.load(inventory_path) if inventory_path else InMemoryInventoryStore()
        session = boto3.Session(profile_name=profile or get_default_profile(), region_name=region)

        collection = TargetCollection(session, store, seeds, region_name=region, config=RefreshConfig.from_env())
        records = collection.collect_all() if fetch else None
    except (AAError, ClientError, BotoCoreError) as e:
        print_error(format_error_for_user(e))
        if debug:
            logger.exception("refresh failed")
        sys.exit(1)

    view = collection.targets
    if output_format == "json":
        payload: dict = {"region": region, "references": view.to_dict()}
        if records is not None:
            payload["records"] = {kind.value: items for kind, items in records.items()}
        text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
        if output:
            output.write_text(text, encoding="utf-8")
            if not quiet:
                print_success(f"저장됨: {output}")
        else:
            click.echo(text)
        return

    reference_counts = {kind.value: count for kind, count in view.counts().items()}
    record_counts = {kind.value: len(items) for kind, items in records.items() if items} if records is not None else None
    console.print(build_summary_table(reference_counts, record_counts))
    if not quiet:
        print_success(f"{len(view)}개 참조 확장 완료")


def _load_event(path: Path) -> dict:
    """EventBridge 이벤트 JSON 로드 (객체가 아니면 BadParameter)"""
    try:
        with open(path, encoding="utf-8") as fh:
            event = json.load(fh)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"JSON 형식이 아닙니다: {e}", param_hint="--event") from e

    if not isinstance(event, dict):
        raise click.BadParameter("이벤트는 JSON 객체여야 합니다", param_hint="--event")
    return event
