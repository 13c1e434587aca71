"""Live auction tracker: roster import, player status and budget bookkeeping."""
