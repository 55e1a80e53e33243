# Upstream service clients package
