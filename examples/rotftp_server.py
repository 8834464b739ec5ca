#!/usr/bin/env python
# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-

import sys
import logging

from optparse import OptionParser

import rotftp

log = logging.getLogger('rotftp')
log.setLevel(logging.INFO)

# console handler
handler = logging.StreamHandler()
handler.setLevel(logging.DEBUG)
default_formatter = logging.Formatter('[%(asctime)s] %(message)s')
handler.setFormatter(default_formatter)
log.addHandler(handler)

def main():
    usage = "usage: %prog [options]"
    parser = OptionParser(usage=usage)
    parser.add_option('-a',
                      '--address',
                      help='listen address (default: 127.0.0.1:6667)',
                      default='127.0.0.1:6667')
    parser.add_option('-p',
                      '--payload',
                      help='file to serve to clients (default: payload.txt)',
                      default='payload.txt')
    parser.add_option('-r',
                      '--retries',
                      type='int',
                      help=f'transmissions per block (default: {rotftp.DEF_RETRIES})')
    parser.add_option('-t',
                      '--timeout',
                      type='float',
                      help=f'seconds to wait for each ACK (default: {rotftp.DEF_TIMEOUT})')
    parser.add_option('-d',
                      '--debug',
                      action='store_true',
                      default=False,
                      help='upgrade logging from info to debug')
    parser.add_option('-q',
                      '--quiet',
                      action='store_true',
                      default=False,
                      help="downgrade logging from info to warning")
    options, args = parser.parse_args()

    if args:
        parser.error("Unexpected arguments")

    if options.debug and options.quiet:
        sys.stderr.write("The --debug and --quiet options are "
                         "mutually exclusive.\n")
        parser.print_help()
        sys.exit(1)

    if options.debug:
        log.setLevel(logging.DEBUG)
        # increase the verbosity of the formatter
        debug_formatter = logging.Formatter('[%(asctime)s%(msecs)03d] %(levelname)s [%(name)s:%(lineno)s] %(message)s')
        handler.setFormatter(debug_formatter)
    elif options.quiet:
        log.setLevel(logging.WARNING)

    host, _, port = options.address.rpartition(':')
    if not host or not port.isdigit():
        parser.error(f"Invalid listen address: {options.address}")

    try:
        with open(options.payload, 'rb') as fileobj:
            payload = fileobj.read()
    except OSError as err:
        log.error(f"Could not read payload: {err}")
        sys.exit(1)

    try:
        config = rotftp.ServerConfig(host, int(port), options.retries, options.timeout)
        server = rotftp.TftpServer(payload, config)
        server.listen()
    except rotftp.TftpException as err:
        log.error(str(err))
        sys.exit(1)
    except KeyboardInterrupt:
        pass

if __name__ == '__main__':
    main()
