# Router Layer — Thin Controllers
