"""Software stand-in for a radio transceiver pair."""
