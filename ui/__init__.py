# UI: main window, entry rows, logs panel
