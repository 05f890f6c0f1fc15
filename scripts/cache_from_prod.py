from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from fake_cloudwatch_logs.app import cache
from fake_cloudwatch_logs.app.models import LogGroup, LogStream, OutputLogEvent
from fake_cloudwatch_logs.app.service import LogsService


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Inspect a fake CloudWatch Logs cache directory, or fill it from a real "
            "account with the 'download' command."
        )
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["summary", "download"],
        default="summary",
        help="summary prints cache contents; download fetches from AWS.",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=Path("fixtures"),
        help="Cache root directory.",
    )
    parser.add_argument("--region", default="us-east-1", help="AWS region to download from.")
    parser.add_argument("--profile", default=None, help="AWS profile name.")
    return parser.parse_args()


def summarize(cache_dir: Path) -> dict[str, Any]:
    service = LogsService()
    cache.load_into(cache_dir, service)
    return {
        "groups": [group.log_group_name for group in service.store.groups()],
        **service.store.counts(),
    }


def download(cache_dir: Path, *, region: str, profile: str | None) -> dict[str, int]:
    import boto3

    session = boto3.Session(profile_name=profile, region_name=region)
    logs = session.client("logs")
    totals = {"groups": 0, "streams": 0, "events": 0}

    groups: list[LogGroup] = []
    kwargs: dict[str, Any] = {}
    while True:
        resp = logs.describe_log_groups(**kwargs)
        groups.extend(LogGroup.model_validate(item) for item in resp.get("logGroups", []))
        if not resp.get("nextToken"):
            break
        kwargs["nextToken"] = resp["nextToken"]
    cache.write_groups(cache_dir, groups)
    totals["groups"] = len(groups)

    for group in groups:
        group_name = group.log_group_name
        streams: list[LogStream] = []
        kwargs = {"logGroupName": group_name}
        while True:
            print(f"fetching streams group={group_name} next_token={kwargs.get('nextToken')}")
            resp = logs.describe_log_streams(**kwargs)
            streams.extend(LogStream.model_validate(item) for item in resp.get("logStreams", []))
            if not resp.get("nextToken"):
                break
            kwargs["nextToken"] = resp["nextToken"]
        cache.write_streams(cache_dir, group_name, streams)
        totals["streams"] += len(streams)

        for stream in streams:
            events: list[OutputLogEvent] = []
            kwargs = {"logGroupName": group_name, "logStreamName": stream.log_stream_name}
            # Walk backward from the tail until a page comes back empty.
            while True:
                resp = logs.get_log_events(**kwargs)
                page = [OutputLogEvent.model_validate(item) for item in resp.get("events", [])]
                print(
                    f"fetched events group={group_name} "
                    f"stream={stream.log_stream_name} count={len(page)}"
                )
                events[:0] = page
                if not page or not resp.get("nextBackwardToken"):
                    break
                kwargs["nextToken"] = resp["nextBackwardToken"]
            cache.write_events(cache_dir, group_name, stream.log_stream_name, events)
            totals["events"] += len(events)

    return totals


def main() -> None:
    args = _parse_args()
    if args.command == "download":
        result = download(args.cache_dir, region=args.region, profile=args.profile)
    else:
        result = summarize(args.cache_dir)
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
