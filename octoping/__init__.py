#!/usr/bin/python

##############################################################################
#                                                                            #
#  Objective:                                                                #
#    Active measurement of the latency and loss of a network path (wifi,    #
#    WAN) using periodic UDP probes echoed by a stateless reflector.         #
#                                                                            #
#  Features supported:                                                       #
#    - per probe round-trip time                                             #
#    - uplink/downlink delay split without clock synchronization            #
#      (smoothed clock phase estimated from the best round-trips)            #
#    - loss detection with a bounded window of outstanding probes            #
#    - IPv4 and IPv6, DSCP/TOS and TTL                                       #
#    - CSV report per probe, summary with min/max/avg/jitter/loss            #
#                                                                            #
#  Modes of operation:                                                       #
#    - Sender                                                                #
#        sends probes for a fixed duration, reports every probe              #
#    - Reflector                                                             #
#        timestamps and echoes every probe received                          #
#                                                                            #
#  Limitations:                                                              #
#    The uplink/downlink split relies on the assumption that the fastest     #
#    round-trips are symmetric. A constant path asymmetry can not be         #
#    detected, only variations around it.                                   #
#    No hardware timestamping, values include host scheduling delays.        #
#                                                                            #
#  Not yet supported:                                                        #
#    - per probe time-out (loss is only detected by window pressure and     #
#      at the end of the run)                                                #
#    - retransmission or padding of probes                                   #
#                                                                            #
##############################################################################

__title__ = "octoping"
__version__ = "1.0.0"
