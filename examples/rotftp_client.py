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
    usage = """usage: %prog [options] host:file destination

             destination:
               - for STDOUT
               - path/file - for the output file name
               """
    parser = OptionParser(usage=usage)
    parser.add_option('-p',
                      '--port',
                      help='remote port to use (default: 69)',
                      default=69)
    parser.add_option('-t',
                      '--timeout',
                      type='float',
                      help=f'seconds to wait for each block (default: {rotftp.DEF_TIMEOUT})')
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
    parser.add_option('-l',
                      '--localip',
                      action='store',
                      dest='localip',
                      default=None,
                      help='local IP for client to bind to (ie. interface)')
    options, args = parser.parse_args()

    if len(args) != 2:
        parser.error("Incorrect number of arguments")

    host, _, src = args[0].partition(':')
    if not host or not src:
        parser.error(f"Expected host:file, got {args[0]}")
    dest = args[1]

    if options.debug and options.quiet:
        sys.stderr.write("The --debug and --quiet options are "
                         "mutually exclusive.\n")
        parser.print_help()
        sys.exit(1)

    if options.debug:
        log.setLevel(logging.DEBUG)
    elif options.quiet or dest == '-':
        log.setLevel(logging.WARNING)

    tclient = rotftp.TftpClient(host,
                                int(options.port),
                                options.timeout,
                                localip=options.localip)
    try:
        tclient.download(src, dest)
    except rotftp.TftpException as err:
        sys.stderr.write("%s\n" % str(err))
        sys.exit(1)
    except KeyboardInterrupt:
        pass

if __name__ == '__main__':
    main()
