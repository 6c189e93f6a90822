"""
Generation of Ishihara-style colour vision test plates.

A plate is a disk packed with non-overlapping dots (`ishihara.dots`),
coloured along a confusion line (`ishihara.color.confusion_lines`) so that a hidden shape
(`ishihara.shapes`) is visible to normal colour vision but not to an observer with the chosen
deficiency.  `ishihara.plate.IshiharaPlate` ties these together.
"""
