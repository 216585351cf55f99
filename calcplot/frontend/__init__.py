"""Tkinter front end: display formatting, input dispatch and plotting."""
