#!/usr/bin/env python3
"""
CLI tool for resolving twin references.

Usage:
    python -m twinref_svc.cli resolve --fixture demo.yaml --component-type-id com.example.sensor
    python -m twinref_svc.cli resolve --service-url https://... --workspace-id ws --property temperature
    python -m twinref_svc.cli policy --workspace-id ws --arn arn:... --s3-location arn:aws:s3:::bucket
    python -m twinref_svc.cli key --entity-id e1 --component-name c1 --external-id x --property-name p
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from colorama import Fore, Style, just_fix_windows_console

from .adapters.base import TwinServiceClient
from .adapters.rest import RestTwinClient
from .adapters.static import StaticTwinClient
from .catalog.keys import derive_composite_key
from .catalog.types import EntityPropertyReference
from .config import ResolverConfig
from .notices import NoticeSeverity
from .policy import PolicyTemplateError, WorkspaceInfo, build_policy
from .query import TwinQuery
from .resolver import HistoryFetchError, ReferenceResolver


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_json(data: Any, indent: int = 2) -> None:
    output = json.dumps(data, indent=indent, default=str)
    print(output)


def _build_client(args) -> TwinServiceClient:
    if args.fixture:
        return StaticTwinClient.from_yaml(args.fixture)
    auth_type, auth_config = "none", {}
    if args.token:
        auth_type, auth_config = "bearer", {"token": args.token}
    return RestTwinClient(
        base_url=args.service_url,
        workspace_id=args.workspace_id,
        auth_type=auth_type,
        auth_config=auth_config,
    )


async def cmd_resolve(args) -> int:
    """Resolve history batches for a query."""
    client = _build_client(args)
    resolver = ReferenceResolver(
        client=client,
        config=ResolverConfig(
            max_concurrency=args.concurrency,
            verbose_notices=args.verbose,
        ),
    )
    query = TwinQuery(
        workspace_id=args.workspace_id,
        entity_id=args.entity_id,
        component_type_id=args.component_type_id,
        properties=tuple(args.property or ()),
    )

    try:
        result = await resolver.resolve_batch(query)
    except HistoryFetchError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1
    finally:
        await client.close()

    if args.json:
        print_json(result.to_dict())
        return 0

    print(colorize(f"\nResolved ({len(result.resolved)}):", Style.BRIGHT))
    for ref in result.resolved:
        epr = ref.entity_property_reference
        component = epr.component_name or colorize("(unmatched)", Style.DIM)
        print(
            f"  {colorize('•', Fore.CYAN)} {colorize(ref.entity_name, Fore.GREEN)} "
            f"[{epr.entity_id}] {component} . {epr.property_name} "
            f"{colorize(f'({len(ref.values)} values)', Style.DIM)}"
        )
    if not result.resolved:
        print(colorize("  (none)", Style.DIM))

    for notice in result.notices:
        color = Fore.YELLOW if notice.severity == NoticeSeverity.WARNING else Fore.BLUE
        print(colorize(f"  {notice.severity.value}: {notice.text}", color), file=sys.stderr)

    return 0


def cmd_policy(args) -> int:
    """Print the access policy for a workspace."""
    workspace = WorkspaceInfo(
        workspace_id=args.workspace_id,
        arn=args.arn,
        s3_location=args.s3_location,
    )
    try:
        document = build_policy(workspace)
    except PolicyTemplateError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1
    if args.pretty:
        print_json(json.loads(document))
    else:
        print(document)
    return 0


def cmd_key(args) -> int:
    """Print the composite key for a reference."""
    ref = EntityPropertyReference(
        entity_id=args.entity_id,
        component_name=args.component_name,
        external_id_property={"externalId": args.external_id} if args.external_id else {},
        property_name=args.property_name,
    )
    print(derive_composite_key(ref))
    return 0


def main(argv: list[str] | None = None) -> int:
    just_fix_windows_console()

    parser = argparse.ArgumentParser(
        description="CLI tool for twin reference resolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # resolve command
    resolve_parser = subparsers.add_parser("resolve", help="Resolve history batches to entity components")
    resolve_parser.add_argument("--fixture", help="YAML fixture to resolve against instead of the service")
    resolve_parser.add_argument("--service-url", default="http://localhost:8080", help="Twin service URL")
    resolve_parser.add_argument("--token", help="Bearer token for the twin service")
    resolve_parser.add_argument("--workspace-id", default="", help="Workspace id")
    resolve_parser.add_argument("--entity-id", default="", help="Entity to fetch history for")
    resolve_parser.add_argument("--component-type-id", default="", help="Component type to resolve")
    resolve_parser.add_argument("--property", action="append", help="Property name (repeatable)")
    resolve_parser.add_argument("--concurrency", type=int, default=1, help="Batches resolved at once")
    resolve_parser.add_argument("--verbose", action="store_true", help="Report dropped and unmatched batches")
    resolve_parser.add_argument("--json", action="store_true", help="Print JSON")

    # policy command
    policy_parser = subparsers.add_parser("policy", help="Render the dashboard access policy")
    policy_parser.add_argument("--workspace-id", required=True)
    policy_parser.add_argument("--arn", required=True, help="Workspace ARN")
    policy_parser.add_argument("--s3-location", required=True, help="Workspace bucket ARN")
    policy_parser.add_argument("--pretty", action="store_true", help="Indent the document")

    # key command
    key_parser = subparsers.add_parser("key", help="Print the composite key of a reference")
    key_parser.add_argument("--entity-id")
    key_parser.add_argument("--component-name")
    key_parser.add_argument("--external-id")
    key_parser.add_argument("--property-name")

    args = parser.parse_args(argv)

    if args.command == "resolve":
        return asyncio.run(cmd_resolve(args))
    elif args.command == "policy":
        return cmd_policy(args)
    elif args.command == "key":
        return cmd_key(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
