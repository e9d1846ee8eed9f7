import serial.tools.list_ports


def get_hw_ports() -> dict[str, tuple]:
    """Serial ports backed by real hardware: device -> (description, hwid)."""
    port_dict = dict()
    for p in list(serial.tools.list_ports.comports()):
        if p.hwid != "n/a":
            port_dict[p.device] = tuple(p)[1:]
    return port_dict
