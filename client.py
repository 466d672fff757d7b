"""A CLI for the xgw3_rf library.

xgw3_rf is used to decode the local message bus of the Xiaomi Gateway 3, as used by its
zigbee (property-bag protocol) and bluetooth (binary-event protocol) devices.
"""

from xgw3_cli.client import main

if __name__ == "__main__":
    main()
