"""Spring Order Desk backend: product master, sales orders and job cards."""
