import numpy as np
import cv2
from PIL import Image


def parse_points(text):
    points = []
    for token in text.split():
        try:
            x, y = (int(v) for v in token.split(","))
        except ValueError:
            raise ValueError(f"Ponto inválido '{token}', use o formato x,y") from None
        points.append((x, y))
    if len(points) < 3:
        raise ValueError("O contorno precisa de pelo menos 3 pontos.")
    return points


def mask_from_contour(points, shape):
    if len(points) < 3:
        raise ValueError("O contorno precisa de pelo menos 3 pontos.")
    h, w = shape[:2]
    mask = np.zeros((h, w), dtype=np.uint8)
    cv2.fillPoly(mask, [np.asarray(points, dtype=np.int32)], 255)
    return mask > 127


def mask_bounding_rect(mask):
    # retângulo da máscara com 1 pixel de folga, limitado à imagem
    ys, xs = np.where(mask)
    if len(ys) == 0:
        raise ValueError("A máscara está vazia.")
    h, w = mask.shape
    return (
        max(0, int(ys.min()) - 1),
        max(0, int(xs.min()) - 1),
        min(h, int(ys.max()) + 2),
        min(w, int(xs.max()) + 2),
    )


def load_mask(path):
    img = Image.open(path).convert("L")
    return np.array(img) > 127


def select_contour(source_rgb):
    img_bgr = cv2.cvtColor(source_rgb, cv2.COLOR_RGB2BGR)
    points = []

    def mouse_callback(event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            points.append((x, y))

    window_name = "SELECAO: Clique nos pontos p/ contornar. ENTER p/ finalizar."
    cv2.namedWindow(window_name)
    cv2.setMouseCallback(window_name, mouse_callback)

    while True:
        display = img_bgr.copy()

        for pt in points:
            cv2.circle(display, pt, 3, (0, 0, 255), -1)
        if len(points) > 1:
            cv2.polylines(display, [np.array(points)], False, (0, 255, 0), 2)

        cv2.imshow(window_name, display)

        key = cv2.waitKey(1) & 0xFF
        if key == 13:
            if len(points) > 2:
                break
            print("Selecione pelo menos 3 pontos para formar uma área.")

    cv2.destroyAllWindows()
    return points
