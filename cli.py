from __future__ import annotations

import argparse
import json
import shlex
import sys

import requests

from lrpbridge.settings import settings


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _report(r: requests.Response) -> int:
    try:
        _print(r.json())
    except ValueError:
        print(r.text)
    return 0 if r.ok else 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="LRP bridge CLI")
    p.add_argument("--api", default=settings.api_url, help="API base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("apps", help="List desired LRPs")

    s_app = sub.add_parser("app", help="Show one desired LRP")
    s_app.add_argument("process_guid")

    s_des = sub.add_parser("desire", help="Desire an LRP")
    s_des.add_argument("process_guid")
    s_des.add_argument("--image", required=True)
    s_des.add_argument("--instances", type=int, default=1)
    s_des.add_argument("--route", action="append", default=[], help="Routable URI (repeatable)")
    s_des.add_argument("--env", action="append", default=[], help="KEY=VALUE (repeatable)")
    s_des.add_argument("--last-updated", default="")
    s_des.add_argument("--command", default="", help="Start command, shell-quoted")

    s_upd = sub.add_parser("update", help="Change instance count and annotation")
    s_upd.add_argument("process_guid")
    s_upd.add_argument("--instances", type=int, required=True)
    s_upd.add_argument("--annotation", required=True)

    s_stop = sub.add_parser("stop", help="Stop an LRP")
    s_stop.add_argument("process_guid")

    s_inst = sub.add_parser("instances", help="Show running instances")
    s_inst.add_argument("process_guid")

    s_ev = sub.add_parser("events", help="Show events")
    s_ev.add_argument("--limit", type=int, default=20)
    s_ev.add_argument("--process-guid")

    args = p.parse_args(argv)

    base = args.api.rstrip("/")

    if args.cmd == "apps":
        return _report(requests.get(f"{base}/apps", timeout=10))

    if args.cmd == "app":
        return _report(requests.get(f"{base}/apps/{args.process_guid}", timeout=10))

    if args.cmd == "desire":
        env = {}
        for item in args.env:
            key, sep, value = item.partition("=")
            if not sep:
                p.error(f"--env expects KEY=VALUE, got {item!r}")
            env[key] = value
        payload = {
            "process_guid": args.process_guid,
            "docker_image": args.image,
            "start_command": shlex.split(args.command),
            "environment": env,
            "num_instances": args.instances,
            "last_updated": args.last_updated,
            "routes": args.route,
        }
        return _report(requests.put(f"{base}/apps/{args.process_guid}", json=payload, timeout=30))

    if args.cmd == "update":
        payload = {"instances": args.instances, "annotation": args.annotation}
        return _report(requests.post(f"{base}/apps/{args.process_guid}", json=payload, timeout=30))

    if args.cmd == "stop":
        return _report(requests.put(f"{base}/apps/{args.process_guid}/stop", timeout=30))

    if args.cmd == "instances":
        return _report(requests.get(f"{base}/apps/{args.process_guid}/instances", timeout=10))

    if args.cmd == "events":
        params = {"limit": args.limit}
        if args.process_guid:
            params["process_guid"] = args.process_guid
        return _report(requests.get(f"{base}/events", params=params, timeout=10))

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
