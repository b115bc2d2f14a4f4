#!/usr/bin/env python3

''' Route uncaught exceptions through logging. Install with
sys.excepthook = handle_exception. '''

import sys, logging

def handle_exception(exc_type, exc_value, exc_traceback):

    ''' Log uncaught exceptions at CRITICAL level with the traceback. '''

    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    fun_name = sys._getframe().f_code.co_name
    log = logging.getLogger(f'{__name__}.{fun_name}')
    log.critical('Uncaught exception',
        exc_info = (exc_type, exc_value, exc_traceback))
