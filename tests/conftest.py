import matplotlib

# Reports are written to files only
matplotlib.use("Agg")
