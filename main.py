import cv2
import numpy as np
from light_controller import LightController
from light_endpoint import LightEndpoint
from utils import (
    WEBCAM_ID, WINDOW_NAME, FRAME_WIDTH, FRAME_HEIGHT, KEY_BINDINGS, QUIT_KEYS,
    ENABLE_GESTURES, ENABLE_AUDIO, NotificationQueue, draw_text, COLOR_OFF, COLOR_ON,
)


def handle_key(key, light_controller):
    """Map a cv2.waitKey code to an intent. Returns False when the user quits."""
    if key in QUIT_KEYS:
        return False
    intent = KEY_BINDINGS.get(key)
    if intent:
        light_controller.handle_intent(intent)
    return True


def draw_status(frame, status):
    status_text = (f"Light: {'ON' if status['on'] else 'OFF'} | Bri: {status['brightness']}% "
                   f"| Temp: {status['temperature']}")
    cv2.rectangle(frame, (0, 0), (FRAME_WIDTH, 40), (0, 0, 0), cv2.FILLED)
    draw_text(frame, status_text, (10, 30), COLOR_ON if status['on'] else COLOR_OFF, 0.6)
    if status['pending_sync']:
        draw_text(frame, "syncing...", (10, FRAME_HEIGHT - 15), scale=0.5)


def main():
    notifications = NotificationQueue()
    light_controller = LightController(LightEndpoint(), notify=notifications)

    gesture_recognizer = None
    cap = None
    if ENABLE_GESTURES:
        try:
            from gesture_control import GestureRecognizer
            gesture_recognizer = GestureRecognizer()
            cap = cv2.VideoCapture(WEBCAM_ID)
            cap.set(3, FRAME_WIDTH)
            cap.set(4, FRAME_HEIGHT)
        except Exception as e:
            print(f"Error starting gesture control: {e}")
            print("Continuing without gesture control...")
            gesture_recognizer = None

    audio_controller = None
    if ENABLE_AUDIO:
        try:
            from audio_control import AudioController
            audio_controller = AudioController(light_controller)
            audio_controller.start()
        except Exception as e:
            print(f"Error starting audio controller: {e}")
            print("Continuing without audio control...")
            audio_controller = None

    print("="*60)
    print("Key Light Controller Started")
    print("="*60)
    print(f"Light: {light_controller.endpoint.url}")
    print("Keys: t/space toggle | w/s brightness | d/a temperature | q quit")
    print(f"Gestures: {'ENABLED' if gesture_recognizer else 'DISABLED'}")
    print(f"Claps: {'ENABLED' if audio_controller else 'DISABLED'}")
    print("="*60)

    try:
        while True:
            if cap is not None:
                success, frame = cap.read()
                if not success:
                    print("Failed to read from webcam.")
                    break
                frame = gesture_recognizer.process_frame(frame, light_controller)
            else:
                frame = np.zeros((FRAME_HEIGHT, FRAME_WIDTH, 3), dtype=np.uint8)

            draw_status(frame, light_controller.get_status())
            cv2.imshow(WINDOW_NAME, frame)

            notifications.show_pending()

            key = cv2.waitKey(30) & 0xFF
            if key != 0xFF and not handle_key(key, light_controller):
                break
    finally:
        if gesture_recognizer:
            gesture_recognizer.close()
        if cap is not None:
            cap.release()
        if audio_controller:
            audio_controller.stop()
        light_controller.close()
        notifications.show_pending()
        cv2.destroyAllWindows()
        print("Controller Shut Down.")


if __name__ == "__main__":
    main()
