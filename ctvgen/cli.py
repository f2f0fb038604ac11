"""Command line entry point.

Generates the requested number of transactions, asks the node for their
template hashes and writes the test vectors as JSON.  Any failure aborts
the run with exit status 1 and nothing is written.
"""

import argparse
import logging
import sys
import traceback
from typing import List, Optional

from ctvgen.env import Env
from ctvgen.rpc import connect_rpc, TemplateOracle
from ctvgen.sink import OutputDestination
from ctvgen.stream import RandomStream
from ctvgen.vectors import generate_test_vectors, write_entries
from ctvgen.version import ctvgen_version


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ctvgen',
        description='Generate random BIP-119 default template hash '
                    'test vectors using a node as the reference.')
    parser.add_argument('-u', '--rpc-url', dest='rpc_url',
                        help='node JSON-RPC URL (env RPC_URL)')
    parser.add_argument('-c', '--cookie-file', dest='cookie_file',
                        help='node .cookie file for RPC authentication '
                             '(env COOKIE_FILE)')
    parser.add_argument('-n', '--transaction-count', dest='transaction_count',
                        type=int,
                        help='number of transactions to generate '
                             '(env TRANSACTION_COUNT, default 100)')
    parser.add_argument('-o', '--out-file', dest='out_file',
                        help="output path, '-' for standard output "
                             "(env OUT_FILE, default '-')")
    parser.add_argument('-s', '--seed', dest='seed', type=int,
                        help='random seed (env SEED, default from OS entropy)')
    parser.add_argument('-v', '--verbose', action='store_const',
                        dest='log_level', const='debug',
                        help='log every generated transaction')
    parser.add_argument('--version', action='version', version=ctvgen_version)
    return parser


def run(env: Env) -> None:
    logger = logging.getLogger('ctvgen')

    # Open the destination first so a bad path fails before any RPC work.
    dest = OutputDestination.from_str(env.out_file)
    with dest:
        rpc = connect_rpc(env.rpc_url, cookie_file=env.cookie_file,
                          timeout=env.rpc_timeout)
        try:
            stream = RandomStream(env.seed)
            logger.info(f'generating {env.transaction_count:,d} '
                        f'transactions with seed {stream.seed} '
                        f'into {dest.name}')
            entries = generate_test_vectors(stream, TemplateOracle(rpc),
                                            env.transaction_count)
            write_entries(dest, entries)
        finally:
            rpc.close()

    logger.info(f'wrote {len(entries) - 1:,d} test vectors to {dest.name}')


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        env = Env(vars(args))
    except Env.Error as e:
        logging.basicConfig(level=logging.INFO)
        logging.critical(f'configuration error: {e}')
        return 1

    logging.basicConfig(level=env.log_level, format=env.log_format,
                        stream=sys.stderr)

    try:
        run(env)
    except Exception:
        traceback.print_exc()
        logging.critical('ctvgen terminated abnormally')
        return 1
    return 0
