"""
Pipeline one-shot: Airtable -> archivo JSON en GitHub.

Este paquete está diseñado para ejecutarse como job (cron / task scheduler),
no como servicio de larga duración.

Flujo:
- Lee la fecha de la última modificación de la tabla.
- Si el último cambio es más reciente que el umbral (debounce), no hace nada.
- Si no, exporta todos los registros como JSON y actualiza el archivo en
  GitHub usando el SHA actual como precondición.
"""
