"""Command-line interface for calldata generation.

Provides the `protocall` entry point with subcommands:
- encode: offline encoding of a method signature or a generic
  (protocol, action) operation with raw arguments
- calldata: validated calldata for a registered protocol operation, using
  a registry built from environment configuration

Calldata is printed to stdout; errors go to stderr with exit code 1.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

import pydantic

from protocol_registry.abi.method import Method
from protocol_registry.abi.types import TypeDescriptor, TypeKind
from protocol_registry.core.bootstrap import build_generic_registry, build_registry
from protocol_registry.core.config import load_settings
from protocol_registry.core.errors import ProtocolRegistryError
from protocol_registry.core.logging import configure_logging
from protocol_registry.data.constants import ETH_CHAIN_ID
from protocol_registry.data.models import ContractAction, TransactionParams


def _parse_arg(desc: TypeDescriptor, raw: str) -> Any:
    """Turn a command-line string into a value the ABI coercion accepts."""
    if desc.kind == TypeKind.BOOL:
        lowered = raw.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return raw
    if desc.kind in (TypeKind.ARRAY, TypeKind.FIXED_ARRAY):
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            return raw
        if not isinstance(items, list) or desc.elem is None:
            return items
        return [_parse_arg(desc.elem, json.dumps(i) if not isinstance(i, str) else i) for i in items]
    return raw


def _parse_args(method: Method, raw_args: Sequence[str]) -> list[Any]:
    if len(raw_args) != len(method.inputs):
        # Leave the count check to the encoder
        return list(raw_args)
    return [_parse_arg(desc, raw) for desc, raw in zip(method.inputs, raw_args)]


def run_encode(args: argparse.Namespace) -> str:
    """Encode calldata without chain access."""
    if args.signature:
        method = Method.from_signature(args.signature)
        return method.encode_call_hex(*_parse_args(method, args.args))

    if not (args.protocol and args.action):
        raise SystemExit("encode needs --signature or both --protocol and --action")
    registry = build_generic_registry(args.chain_id)
    op = registry.get_action(args.protocol, args.action, args.chain_id)
    return op.generate_calldata(_parse_args(op.method, args.args), chain_id=args.chain_id)


def run_calldata(args: argparse.Namespace) -> str:
    """Build the registry from the environment and produce calldata."""
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)
    registry = build_registry(settings)

    op = registry.get_protocol(args.chain_id, args.contract)
    action = ContractAction(args.action)
    extra: dict[str, Any] = {}
    if args.referral_code is not None:
        extra["referral_code"] = args.referral_code
    params = TransactionParams(
        amount=args.amount,
        sender=args.sender,
        recipient=args.recipient,
        asset=args.asset,
        extra=extra,
    )

    if args.skip_validation:
        return op.generate_calldata(args.chain_id, action, params)
    return op.prepare(args.chain_id, action, params, timeout=settings.rpc_timeout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protocall",
        description="Generate calldata for DeFi lending and staking protocols",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Encode command
    encode_parser = subparsers.add_parser("encode", help="Encode a call offline")
    target_group = encode_parser.add_argument_group("target")
    target_group.add_argument(
        "--signature",
        help='Method signature, e.g. "transfer(address,uint256)"',
    )
    target_group.add_argument("--protocol", help="Protocol of a generic operation")
    target_group.add_argument("--action", help="Action of a generic operation")
    target_group.add_argument(
        "--chain-id",
        type=int,
        default=ETH_CHAIN_ID,
        help=f"Chain of a generic operation (default: {ETH_CHAIN_ID})",
    )
    encode_parser.add_argument("args", nargs="*", metavar="ARG", help="Method arguments")
    encode_parser.set_defaults(func=run_encode)

    # Calldata command
    calldata_parser = subparsers.add_parser(
        "calldata",
        help="Validate a request and generate its calldata",
    )
    request_group = calldata_parser.add_argument_group("request")
    request_group.add_argument("--chain-id", type=int, required=True, help="Chain id")
    request_group.add_argument("--contract", required=True, help="Protocol contract address")
    request_group.add_argument(
        "--action",
        required=True,
        choices=[a.value for a in ContractAction],
        help="Action to encode",
    )
    request_group.add_argument("--asset", required=True, help="Asset address")
    request_group.add_argument("--amount", type=int, required=True, help="Amount in base units")
    request_group.add_argument("--sender", required=True, help="Sending account")
    request_group.add_argument("--recipient", help="Beneficiary (default: sender)")
    request_group.add_argument("--referral-code", type=int, help="Aave referral code")

    options_group = calldata_parser.add_argument_group("options")
    options_group.add_argument(
        "--skip-validation",
        action="store_true",
        help="Encode without chain or balance checks",
    )
    options_group.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    calldata_parser.set_defaults(func=run_calldata)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        calldata = args.func(args)
    except ProtocolRegistryError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    except pydantic.ValidationError as e:
        print(f"ERROR: invalid request: {e}", file=sys.stderr)
        sys.exit(1)

    print(calldata)


if __name__ == "__main__":
    main()
